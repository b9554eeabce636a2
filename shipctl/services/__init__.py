"""Application services: development mode and the release flow."""
