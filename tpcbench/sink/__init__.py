"""Sub-package for row sinks; it holds no sinks yet."""