from pathlib import Path
from setuptools import setup, find_packages


def read_requirements(filename):
    with open(filename) as f:
        return [req for req in (req.partition('#')[0].strip() for req in f) if req]


setup(
    name='cmsentry',
    version='0.1.0',
    description='Schema driven content field transformations for CMS entry editors.',
    long_description=Path('README.rst').read_text(),
    long_description_content_type='text/x-rst',
    license='MIT',
    packages=find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.9',
    install_requires=read_requirements('requirements.in'),
    extras_require={
        'test': [
            'pytest',
            'pytest-asyncio',
            'click>=8.2',
        ],
    },
    entry_points={
        'console_scripts': [
            'cmsentry = cmsentry.cli.main:app',
        ]
    },
    classifiers=[
        'Development Status :: 2 - Pre-Alpha',
        'Environment :: Console',
        'Intended Audience :: Developers',
        'License :: OSI Approved :: MIT License',
        'Operating System :: POSIX',
        'Operating System :: POSIX :: Linux',
        'Programming Language :: Python :: 3 :: Only',
        'Programming Language :: Python :: 3.9',
        'Topic :: Internet :: WWW/HTTP :: Site Management',
    ],
)
