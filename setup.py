#!/usr/bin/env python
import sys

from Cython.Build import cythonize
from setuptools import Extension, setup

extensions = [
    Extension(
        "packbits_codec._codec",
        ["src/packbits_codec/_codec.pyx"],
        extra_compile_args=["/d2FH4-"] if sys.platform == "win32" else [],
    )
]


setup(ext_modules=cythonize(extensions))
