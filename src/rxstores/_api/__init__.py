"""Internal endpoint helpers: URL building, fetching and record parsing."""
