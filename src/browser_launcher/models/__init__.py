"""Browser data models."""
