#!/usr/bin/env python3
from __future__ import annotations

import os
import setuptools
import pathlib
import sys
import toml

__prefix__ = os.getenv('RADIX85_PREFIX') or ''
__minver__ = '3.8'
__author__ = 'radix85 developers'
__slogan__ = 'Streaming Ascii85 and Z85 encoders and decoders.'
__topics__ = [
    'Development Status :: 3 - Alpha',
    'Operating System :: OS Independent',
    'Programming Language :: Python :: 3 :: Only',
    'Topic :: Communications',
    'Topic :: Text Processing :: Filters',
]

__scripts__ = {
    'a85'     : 'radix85.units.encoding.a85:a85',
    'ascii85' : 'radix85.units.encoding.a85:a85',
    'z85'     : 'radix85.units.encoding.z85:z85',
    'base85'  : 'radix85.units.encoding.z85:z85',
}


def get_config():
    sys.path.insert(0, str(pathlib.Path(__file__).parent.absolute()))

    import radix85

    def get_setup_readme(filename: str | pathlib.Path | None = None):
        if filename is None:
            filename = pathlib.Path(__file__).parent.joinpath('README.md')
        try:
            with open(filename, 'r', encoding='UTF8') as README:
                return README.read()
        except FileNotFoundError:
            return radix85.__doc__

    def get_setup_common() -> dict:
        return dict(
            version=radix85.__version__,
            long_description=get_setup_readme(),
            author=__author__,
            description=__slogan__,
            long_description_content_type='text/markdown',
            python_requires=F'>={__minver__}',
            classifiers=__topics__,
        )

    if __prefix__ == '!':
        console_scripts = []
    else:
        console_scripts = [
            F'{__prefix__}{name}={path}.run' for name, path in __scripts__.items()
        ]

    ppcfg: dict[str, dict[str, list[str]]] = toml.load('pyproject.toml')
    requirements = [
        requirement for requirement in ppcfg['build-system']['requires']
        if not requirement.startswith('setuptools')
    ]

    config = get_setup_common()
    config.update(
        name=radix85.__distribution__,
        packages=setuptools.find_packages(include=('radix85*',)),
        install_requires=requirements,
        extras_require={'test': ['flake8']},
        entry_points={'console_scripts': console_scripts},
    )

    return config


if __name__ == '__main__':
    setuptools.setup(**get_config())
