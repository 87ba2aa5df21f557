"""Infrastructure helpers: configuration, logging, validation and storage."""
