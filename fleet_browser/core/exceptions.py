class FleetBrowserError(Exception):
    """Base exception for all fleet_browser errors"""
    pass

class ConfigError(FleetBrowserError):
    """Invalid or inconsistent global.json / collection config"""
    pass

class LoadError(FleetBrowserError):
    """
    Record store unreachable, access denied on read, or the snapshot at a
    path has a shape we cannot turn into records
    """
    pass

class PermissionDeniedError(FleetBrowserError):
    """No edit capability, or the backend's rules rejected the request"""
    pass

class NetworkError(FleetBrowserError):
    """Any other backend failure (timeouts, 5xx, transport errors)"""
    pass

class AuthenticationError(FleetBrowserError):
    """Sign-in rejected by the identity provider"""
    pass
