"""
Route behaviors.

    handle_root        GET /              200, empty body
    handle_echo        GET /echo/{text}   200, {text}
    handle_user_agent  GET /user-agent    200, User-Agent value
    FileHandler        GET|POST /files/{name}
"""

from .basic import handle_root, handle_echo, handle_user_agent
from .files import FileHandler

__all__ = [
    "handle_root",
    "handle_echo",
    "handle_user_agent",
    "FileHandler",
]
