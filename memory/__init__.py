"""Key-value storage backends and codecs."""
