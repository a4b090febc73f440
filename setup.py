from setuptools import setup, find_packages

setup(
    name='houdini_livelink_python',
    version='0.1.0',
    description='Receive live skeletal animation from Houdini LiveLink',
    packages=find_packages(include=['houdini_livelink_python', 'houdini_livelink_python.*']),
    python_requires='>=3.8',
    install_requires=[
        'numpy',
        'scipy',
    ],
    extras_require={
        'test': ['pytest'],
    },
)
