from setuptools import setup, find_packages

setup(
    name="dotline",
    version="0.1.0",
    packages=find_packages(),
    entry_points={
        'console_scripts': [
            'dotline-merge=dotline.cli:main',
        ],
    },
    install_requires=[
        "tqdm",
        "colorama",
    ],
    extras_require={
        'test': ["pytest"],
    },
)
