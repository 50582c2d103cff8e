"""Infrastructure: storage backends, HTTP transport, token sources, connectivity probe."""
