"""Wire helpers for the custom update API. Internal, may change at any time."""
