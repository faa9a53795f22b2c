"""版本信息"""

__version__ = "0.1.0"
__author__ = "joblock contributors"
__description__ = "Redis-backed TTL lock that keeps duplicate jobs off the queue"
