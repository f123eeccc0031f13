"""Form engine — discovery, validation, dirty tracking, submission."""
