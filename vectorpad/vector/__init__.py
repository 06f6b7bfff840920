"""Sub-package for vector-block rendering; it holds no modules yet."""