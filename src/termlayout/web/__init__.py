"""Web 服务模块"""

from termlayout.web.app import create_app
from termlayout.web.server import WebServer

__all__ = ["create_app", "WebServer"]
