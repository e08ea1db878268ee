from setuptools import setup, find_packages

setup(
    name='cq-engine',
    version='0.1.0',
    author='Marc Hadfield',
    author_email='marc@vital.ai',
    description='Acyclic conjunctive query evaluation with GYO reduction and the Yannakakis algorithm',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    packages=find_packages(exclude=["tests", "test_scripts", "test_data"]),
    license='Apache License 2.0',
    install_requires=[

        'pandas>=2.0',
        'pyyaml',
        'tqdm',
        'lark>=1.2.2'

    ],
    extras_require={
        'test': [
            'pytest',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3.12",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: OS Independent",
    ],
    python_requires='>=3.11',
)
