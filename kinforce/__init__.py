"""Family graph layout core."""
