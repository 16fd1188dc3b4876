# setup.py

from setuptools import setup, find_packages

setup(
    name='WarpResize',
    version='0.1',
    packages=find_packages(exclude=['tests', 'tests.*']),
    include_package_data=True,
    install_requires=[
        'numpy',
        'opencv-python-headless',
        'pillow',
        'tyro',
        'warp-lang>=1.5.0',
    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    entry_points='''
        [console_scripts]
        warpresize=warpresize.cli:main
    ''',
)
