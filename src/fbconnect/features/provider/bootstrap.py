"""Client-side script that loads and initializes the provider's JS SDK."""

import json

from src.fbconnect.provider.models import ProviderSession

SDK_URL_TEMPLATE = "//connect.facebook.net/{locale}/all.js"

LOADER_SCRIPT = """(function() {{
\tvar e = document.createElement('script');
\te.src = document.location.protocol + {sdk_url};
\te.async = true;
\tdocument.getElementById('fb-root').appendChild(e);
}}());
"""

INIT_SCRIPT = """window.fbAsyncInit = function() {{
\tFB.init({{
\t\tappId   : {app_id},
\t\tsession : {session},
\t\tstatus  : true,
\t\tcookie  : true,
\t\txfbml   : true
\t}});

\tFB.Event.subscribe('auth.login', function() {{
\t\twindow.location.reload();
\t}});
}};
"""


def render_loader_script(locale: str = "en_US") -> str:
    """Script that injects the SDK asynchronously into `#fb-root`."""
    sdk_url = json.dumps(SDK_URL_TEMPLATE.format(locale=locale))
    return LOADER_SCRIPT.format(sdk_url=sdk_url)


def render_init_script(app_id: str, session: ProviderSession | None) -> str:
    """
    `fbAsyncInit` callback that initializes the SDK with the server's session.

    A login in the browser reloads the page so the next request carries the
    new session cookie.
    """
    session_json = json.dumps(session.to_sdk_dict() if session else None)
    return INIT_SCRIPT.format(app_id=json.dumps(app_id), session=session_json)


def render_bootstrap_script(app_id: str, session: ProviderSession | None, locale: str = "en_US") -> str:
    """Loader followed by the init callback, ready to serve as one script."""
    return render_loader_script(locale) + "\n" + render_init_script(app_id, session)
