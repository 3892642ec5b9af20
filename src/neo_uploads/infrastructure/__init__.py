"""Infrastructure adapters for neo-uploads.

HTTP fetching, external process execution and storage backends. Import the
subpackages directly; backends are loaded on demand so their SDKs are only
imported when used.
"""
