"""Query workloads, worker-thread driving, latency measurement and reporting."""

__version__ = "0.1.0"