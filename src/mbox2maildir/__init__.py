"""Convert mbox archives into a Maildir tree, extracting and compressing attachments."""

__version__ = "0.1.0"
