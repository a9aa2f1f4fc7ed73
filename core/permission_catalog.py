from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Mapping

from core.models import PermissionInfo, PermissionLevel

HIGH = PermissionLevel.HIGH
MEDIUM = PermissionLevel.MEDIUM
LOW = PermissionLevel.LOW

DEFAULT_PERMISSION_INFO = PermissionInfo(LOW, "System permission with low risk")

_PERMISSIONS: Dict[str, PermissionInfo] = {
    # identity, sensing, communication
    "CAMERA": PermissionInfo(HIGH, "Can take photos and videos without your knowledge"),
    "LOCATION": PermissionInfo(HIGH, "Can track your location and movement patterns"),
    "MICROPHONE": PermissionInfo(HIGH, "Can record audio and conversations"),
    "CONTACTS": PermissionInfo(HIGH, "Can access your personal contacts and relationships"),
    "PHONE": PermissionInfo(HIGH, "Can access phone numbers and call information"),
    "SMS": PermissionInfo(HIGH, "Can read and send text messages"),
    "CALL_LOG": PermissionInfo(HIGH, "Can access call history and phone logs"),
    "PHONE_NUMBERS": PermissionInfo(HIGH, "Can access device phone numbers"),
    "CALL_CONTROL": PermissionInfo(HIGH, "Can answer incoming calls"),
    "CALL_MONITORING": PermissionInfo(HIGH, "Can monitor and control outgoing calls"),
    "BACKGROUND_LOCATION": PermissionInfo(HIGH, "Can track your location even when app is closed"),
    "HEALTH_DATA": PermissionInfo(HIGH, "Can access health and fitness data"),
    "FILE_MANAGER": PermissionInfo(HIGH, "Can access all files on your device storage"),
    # storage, media, context
    "STORAGE": PermissionInfo(MEDIUM, "Can access files and photos on your device"),
    "PHOTOS": PermissionInfo(MEDIUM, "Can access photos and images on your device"),
    "VIDEOS": PermissionInfo(MEDIUM, "Can access videos on your device"),
    "MUSIC": PermissionInfo(MEDIUM, "Can access audio files and music on your device"),
    "MEDIA_LOCATION": PermissionInfo(MEDIUM, "Can access location information from photos and videos"),
    "CALENDAR": PermissionInfo(MEDIUM, "Can view and modify your calendar events"),
    "SENSORS": PermissionInfo(MEDIUM, "Can access body sensors and health data"),
    "USAGE_ACCESS": PermissionInfo(MEDIUM, "Can access app usage statistics and screen time data"),
    "ACTIVITY_RECOGNITION": PermissionInfo(MEDIUM, "Can access physical activity and step tracking"),
    "BLUETOOTH": PermissionInfo(MEDIUM, "Can access nearby Bluetooth devices"),
    "NEARBY_DEVICES": PermissionInfo(MEDIUM, "Can access nearby Wi-Fi and Bluetooth devices"),
    "ACCOUNTS": PermissionInfo(MEDIUM, "Can access accounts on the device"),
    "VOIP": PermissionInfo(MEDIUM, "Can make and receive internet calls (VoIP)"),
    "SENSORS_BACKGROUND": PermissionInfo(MEDIUM, "Can access body sensors in the background"),
    "UWB": PermissionInfo(MEDIUM, "Can use precise device positioning using ultra-wideband"),
    # infrastructure
    "NOTIFICATIONS": PermissionInfo(LOW, "Can show notifications on your device"),
    "INTERNET": PermissionInfo(LOW, "Can access the internet"),
    "NETWORK_STATE": PermissionInfo(LOW, "Can view network connections"),
    "WIFI_STATE": PermissionInfo(LOW, "Can view Wi-Fi connections"),
    "VIBRATE": PermissionInfo(LOW, "Can control vibration"),
    "WAKE_LOCK": PermissionInfo(LOW, "Can prevent phone from sleeping"),
    "FOREGROUND_SERVICE": PermissionInfo(LOW, "Can run in the foreground"),
    "RECEIVE_BOOT_COMPLETED": PermissionInfo(LOW, "Can start on device boot"),
}

PERMISSION_CATALOG: Mapping[str, PermissionInfo] = MappingProxyType(_PERMISSIONS)


def get_permission_info(permission: str) -> PermissionInfo:
    return PERMISSION_CATALOG.get(permission, DEFAULT_PERMISSION_INFO)
