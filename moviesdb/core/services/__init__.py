"""Application services used by the client facade: parameter validation and pagination."""
