"""HTTP surface: the server-side news proxy."""
