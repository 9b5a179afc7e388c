"""Users module - account directory, listing and management."""

# Module metadata
__module_info__ = {
    "name": "users",
    "version": "1.0.0",
    "description": "Account directory and management module",
    "dependencies": [],
}
