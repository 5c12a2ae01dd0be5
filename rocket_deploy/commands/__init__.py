"""Command line entry points for the deployment toolchain."""
