"""Protocol constants shared across the client."""

DEFAULT_APP_URL: str = "https://localhost:8080"
DEFAULT_AUTH_URL: str = "https://localhost:27464"

AUTHORIZATION_HEADER: str = "Authorization"
HASH_HEADER: str = "Hash"
TIMESTAMP_HEADER: str = "Timestamp"

# Joins the timestamp and the URL in the signed message.
SIGNED_MESSAGE_SEPARATOR: str = "+"

REGISTER_PATH: str = "/user/register"
LOGIN_PATH: str = "/user/login"
FILES_PATH: str = "/files"
LINK_PATH: str = "/link"
LINKS_PATH: str = "/links"

# Characters encodeURIComponent leaves unescaped besides alphanumerics and "_.-~".
URI_COMPONENT_SAFE: str = "!'()*"

VIEWABLE_EXTENSIONS = (".txt",)
