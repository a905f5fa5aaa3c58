"""NiceGUI front end."""
