from reports import category, trend, weekly  # noqa: F401
