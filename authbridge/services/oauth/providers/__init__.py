"""OAuth providers module."""
from .base import OAuth2Client
from .github import GitHubOAuth2Client
from .google import GoogleOAuth2Client

__all__ = ["OAuth2Client", "GoogleOAuth2Client", "GitHubOAuth2Client"]
