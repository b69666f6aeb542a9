"""Swap usage check for swapinfo(8) based systems."""

from setuptools import setup

test_deps = [
    "pytest>=3",
]

setup(
    name="fc.check-swap",
    version="1.0",
    description=__doc__,
    url="https://github.com/flyingcircusio/fc-nixos",
    author="Flying Circus Internet Operations GmbH",
    author_email="mail@flyingcircus.io",
    license="ZPL",
    classifiers=[
        "Environment :: Console",
        "License :: OSI Approved :: Zope Public License",
        "Programming Language :: Python :: 3",
        "Topic :: System :: Monitoring",
    ],
    packages=["fc.check_swap"],
    install_requires=["nagiosplugin"],
    zip_safe=False,
    extras_require={"test": test_deps},
    entry_points={
        "console_scripts": [
            "check_swap=fc.check_swap.swap:main",
        ],
    },
)
