from setuptools import setup, find_packages

setup(
    name='tasks-api',
    version='1.0.0',
    description='HTTP API for tasks with soft delete',
    long_description='A small FastAPI service exposing create, fetch, list, update and soft-delete of tasks stored in a relational table.',
    packages=find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.10',
    install_requires=[
        'fastapi',
        'uvicorn',
        'sqlalchemy>=2.0',
        'pydantic>=2.0',
        'pydantic-settings',
        'psycopg2-binary',
    ],
    extras_require={
        'test': [
            'pytest',
            'httpx',
        ],
    },
    entry_points={
        'console_scripts': [
            'tasks-api=tasks_api.__main__:main',
        ],
    },
    classifiers=['License :: OSI Approved :: MIT License',],
    license="MIT",
)
