"""site-audit - Website health audits for small-business lead generation."""

__version__ = "1.0.0"
