from setuptools import setup, find_packages

setup(
    name="easyphone",
    version="1.0.0",
    packages=find_packages(include=["easyphone", "easyphone.*"]),
    install_requires=[
        "django>=4.0",
        "djangorestframework",
        "drf-spectacular",
        "djangorestframework-simplejwt",
        "psycopg2-binary",
        "python-decouple",
        "requests",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-django",
        ],
    },
    python_requires=">=3.11",
)
