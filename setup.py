"""Setup script for the subscription playlist generator."""

from setuptools import setup, find_namespace_packages

setup(
    name="playlistgen",
    version="0.1.0",
    description="Generate YouTube playlists from subscriptions or video links",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src"),
    python_requires=">=3.8",
    install_requires=[
        "google-api-python-client>=2.0.0",
        "google-auth-oauthlib>=0.4.0",
        "httplib2>=0.19.0",
        "python-dotenv>=0.19.0",
        "requests>=2.25.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
)
