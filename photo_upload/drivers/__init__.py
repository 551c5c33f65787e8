"""Display drivers for photo_upload."""
