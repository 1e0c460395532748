"""vknet: VK API client.

This package contains typed enumerations for API parameters, a browser that
logs in through the VK OAuth web flow, and a service for calling API methods.
"""

from fazuh.vknet.enums.filters import Settings
from fazuh.vknet.enums.filters import VideoFilters
from fazuh.vknet.enums.safety import Display
from fazuh.vknet.model import VkAuthorization
from fazuh.vknet.service.api_service import VkApi
from fazuh.vknet.vk.browser import Browser

__all__ = ["Browser", "Display", "Settings", "VideoFilters", "VkApi", "VkAuthorization"]
