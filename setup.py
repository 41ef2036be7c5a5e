from setuptools import setup

setup(
    name='obscure-id',
    version='1.0',
    description='Keyed, reversible obfuscation of integer ids into short opaque strings.',
    python_requires='>=3.10',
    py_modules=[
        'app',
        'config',
        'core_logic',
        'encoding',
        'limiter',
        'models',
        'obscure_id',
        'randomness',
        'router',
    ],
    install_requires=[
        'fastapi',
        'pydantic>=2',
        'slowapi',
        'uvicorn',
    ],
    extras_require={
        'test': ['pytest', 'httpx'],
    },
)
