"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

COMMANDS = [
    "register", "login", "logout", "status", "list", "read", "download", "upload",
    "share", "links", "revoke", "open-link", "clear", "exit", "help",
]

# Commands whose argument is a remote file name.
FILE_COMMANDS = ("read", "download", "share", "links")

STYLE = Style.from_dict(
    {
        "prompt": "#2E86C1 bold",
        "command": "#0088ff bold",
    }
)

BLUE = "\033[38;2;46;134;193m"
GREEN = "\033[32m"
RESET = "\033[0m"

LOGO = f"""{BLUE}
 ███████╗███████╗ █████╗ ██╗     ██████╗ ██████╗ ██╗██╗   ██╗███████╗
 ██╔════╝██╔════╝██╔══██╗██║     ██╔══██╗██╔══██╗██║██║   ██║██╔════╝
 ███████╗█████╗  ███████║██║     ██║  ██║██████╔╝██║██║   ██║█████╗
 ╚════██║██╔══╝  ██╔══██║██║     ██║  ██║██╔══██╗██║╚██╗ ██╔╝██╔══╝
 ███████║███████╗██║  ██║███████╗██████╔╝██║  ██║██║ ╚████╔╝ ███████╗
 ╚══════╝╚══════╝╚═╝  ╚═╝╚══════╝╚═════╝ ╚═╝  ╚═╝╚═╝  ╚═══╝  ╚══════╝
{RESET}"""

WELCOME_TITLE = "SealDrive CLI - Signed File Storage"
WELCOME_HELP = "Type 'help' for commands or 'exit' to quit.\n"

PROMPT_TEXT = "sealdrive> "
LOGGED_OUT_PROMPT_TEXT = "sealdrive (logged out)> "

HELP_TEXT = """Available commands:
  register <username> <password>      Register new account and log in
  login <username> <password>         Log in and store session token and key
  logout                              Forget the stored session
  status                              Show whether a live session is stored
  list                                List files
  read <filename>                     Show content of a .txt file
  download <filename> [output_path]   Download file (defaults to downloads/<filename>)
  upload <local_path> [remote_name]   Upload a local text file
  share <filename>                    Create a share link for a file
  links <filename>                    Show share links of a file
  revoke <link_id>                    Delete a share link
  open-link <link_id> [output_path]   Fetch a shared file without logging in
  clear                               Clear screen and redisplay welcome message
  help                                Show this help
  exit                                Exit REPL

Examples:
  register alice 'correct horse battery staple'
  login alice 'correct horse battery staple'
  upload notes/todo.txt
  share todo.txt
  links todo.txt
  revoke Xb81kQz0pLmA93tR"""

DOWNLOADS_DIR = "downloads"

SESSION_EXPIRED_MESSAGE = "Session expired or missing. Please run: login <username> <password>"
UPLOAD_FORBIDDEN_MESSAGE = "You don't have permission to upload files."
SHARE_FORBIDDEN_MESSAGE = "You don't have permission to create links."
FORBIDDEN_MESSAGE = "You don't have permission to do that."
