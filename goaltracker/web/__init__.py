"""Web: Flask API for report generation."""
