"""Project-wide constant values."""
from __future__ import annotations

DEFAULT_API_BASE_URL = "https://make-friends-backend.onrender.com"

SEARCH_DEBOUNCE_MS = 300  # quiet period before a search term is sent

# Remote endpoints, relative to the configured base URL
LOGIN_PATH = "/auth/login"
REGISTER_PATH = "/auth/register"
FRIENDS_PATH = "/friends"
RECOMMENDATIONS_PATH = "/friends/recommendations"
PENDING_PATH = "/friends/pending"
SEARCH_PATH = "/friends/search"
TOGGLE_REQUEST_PATH = "/friends/request/{user_id}"
ACCEPT_REQUEST_PATH = "/friends/accept/{user_id}"
UNFRIEND_PATH = "/friends/unfriend/{user_id}"

# User-facing notification texts
MSG_REQUEST_SENT = "Friend request sent"
MSG_REQUEST_CANCELLED = "Friend request cancelled"
MSG_TOGGLE_FAILED = "Error managing friend request"
MSG_ACCEPT_FAILED = "Error accepting friend request"
MSG_ACCEPTED = "Friend request accepted"
MSG_UNFRIEND_FAILED = "Error unfriending user"
MSG_UNFRIENDED = "Friend removed"
MSG_SEARCH_FAILED = "Error searching users"
MSG_ALREADY_FRIENDS = "You are already friends with this user"
MSG_INCOMING_PENDING = "This user already sent you a friend request"
MSG_NO_PENDING_REQUEST = "No pending friend request from this user"
MSG_NOT_A_FRIEND = "This user is not in your friends list"
MSG_UNAUTHORIZED = "Your session has expired, please sign in again"
LOAD_FAILURE_MESSAGES = {
    "friends": "Error fetching friends",
    "recommendations": "Error fetching recommendations",
    "pending_requests": "Error fetching pending requests",
}

__all__ = [
    "DEFAULT_API_BASE_URL",
    "SEARCH_DEBOUNCE_MS",
    "LOGIN_PATH",
    "REGISTER_PATH",
    "FRIENDS_PATH",
    "RECOMMENDATIONS_PATH",
    "PENDING_PATH",
    "SEARCH_PATH",
    "TOGGLE_REQUEST_PATH",
    "ACCEPT_REQUEST_PATH",
    "UNFRIEND_PATH",
    "MSG_REQUEST_SENT",
    "MSG_REQUEST_CANCELLED",
    "MSG_TOGGLE_FAILED",
    "MSG_ACCEPT_FAILED",
    "MSG_ACCEPTED",
    "MSG_UNFRIEND_FAILED",
    "MSG_UNFRIENDED",
    "MSG_SEARCH_FAILED",
    "MSG_ALREADY_FRIENDS",
    "MSG_INCOMING_PENDING",
    "MSG_NO_PENDING_REQUEST",
    "MSG_NOT_A_FRIEND",
    "MSG_UNAUTHORIZED",
    "LOAD_FAILURE_MESSAGES",
]
