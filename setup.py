from setuptools import setup

setup(
    name="sg-sync",
    version="1.0.0",
    packages=["sg_sync"],
    url="https://github.com/wobeng/sg-sync",
    license="",
    author="wobeng",
    author_email="wobeng@yblew.com",
    description="keep an AWS security group ingress rule pointed at your current public IP",
    python_requires=">=3.8",
    install_requires=[
        "boto3",
        "botocore",
        "requests",
        "click",
        "simplejson",
        "python-dotenv",
        "sentry-sdk",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
    entry_points={
        "console_scripts": [
            "sg-sync=sg_sync.cli:cli",
        ],
    },
)
