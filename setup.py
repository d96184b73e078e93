# setup.py - Build Cython extension
from setuptools import setup, Extension
from Cython.Build import cythonize
import numpy as np

extensions = [
    Extension(
        "jumphash._jump_core",
        sources=["jumphash/_jump_core.pyx"],
        include_dirs=[np.get_include()],
        define_macros=[("NPY_NO_DEPRECATED_API", "NPY_1_7_API_VERSION")],
    )
]

setup(
    name="jumphash",
    version="1.0.0",
    packages=["jumphash"],
    install_requires=[
        "numpy",
        "xxhash",
    ],
    extras_require={
        "test": ["pytest"],
    },
    python_requires=">=3.8",
    ext_modules=cythonize(extensions, language_level=3),
)
