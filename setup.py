from setuptools import setup, find_packages

setup(
    name='dubl-trees',
    version='0.1.0',
    description='Rose trees with cached upward and accumulating downward monoidal annotations.',
    long_description=open('README.md').read(),
    long_description_content_type='text/markdown',
    packages=find_packages(where='src'),
    package_dir={'': 'src'},
    install_requires=[],
    extras_require={
        'test': ['pytest>=7.4']
    },
    python_requires='>=3.11',
)
