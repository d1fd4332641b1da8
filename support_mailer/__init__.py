"""SciTech support mailer: transactional email dispatch for the support portal."""

__version__ = "1.0.0"
