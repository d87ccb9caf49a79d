from setuptools import find_packages, setup

setup(
    name="narray-backend",
    version="0.1.0",
    package_dir={"": "backend"},
    packages=find_packages("backend", exclude=["tests", "tests.*"]),
    install_requires=[
        "google-genai>=1.0",
        "imageio-ffmpeg>=0.4.9",
        "moviepy>=2.0",
        "numpy>=1.24",
        "Pillow>=10.0",
        "pydantic>=2.0",
        "python-dotenv>=1.0",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": ["pytest>=7.4", "pytest-asyncio>=0.23"],
    },
    package_data={"shared": ["options.yaml"]},
    include_package_data=True,
    python_requires=">=3.10",
    description="Backend package for narrated slide videos (script generation, TTS and video composition)",
    author="Narray Developers",
)
