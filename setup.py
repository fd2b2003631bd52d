#!/usr/bin/env python3

from setuptools import find_namespace_packages, setup


def get_version():
    with open("wb/mqtt_dm/__init__.py", "r", encoding="utf-8") as f:
        for line in f:
            if line.startswith("__version__"):
                return line.split("=")[1].strip().strip('"')
    raise RuntimeError("__version__ not found")


setup(
    name="wb-mqtt-dm",
    version=get_version(),
    description="Thing-model data adapter for MQTT devices on Wiren Board controllers",
    license="MIT",
    maintainer="Wiren Board Team",
    maintainer_email="info@wirenboard.com",
    packages=find_namespace_packages(include=["wb.*"]),
    python_requires=">=3.8",
    install_requires=["paho-mqtt>=2.0"],
    extras_require={"test": ["pytest"]},
    entry_points={
        "console_scripts": ["wb-mqtt-dm = wb.mqtt_dm.cli.main:main"],
    },
)
