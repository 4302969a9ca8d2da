"""OpenClaw provisioner — bootstrap Node.js and the OpenClaw CLI onto a host."""

__version__ = "0.1.0"
