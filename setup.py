import os

from setuptools import setup, find_packages


def read(fname):
    with open(os.path.join(os.path.dirname(__file__), fname)) as f:
        return f.read()


setup(
    name='django-dynamic-grid',
    version='0.2.0',
    description='Spreadsheet-style tables, columns, rows and cells for Django, with a headless grid editing engine',
    long_description=read('README.rst'),
    url='https://github.com/cdoukoure/django-dynamic-grid',
    author='Jean-Charles DOUKOURE',
    author_email='c.doukoure@outlook.fr',
    license='MIT',
    classifiers=[
        'Framework :: Django',
        'Framework :: Django :: 4.2',
        'Framework :: Django :: 5.0',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
    ],
    packages=find_packages(),
    python_requires='>=3.10',
    install_requires=[
        'django>=4.2',
        'djangorestframework>=3.14',
        'asgiref>=3.6',
    ],
    extras_require={
        'test': ['pytest', 'pytest-django'],
        'postgres': ['psycopg2-binary'],
        'mysql': ['mysqlclient'],
    },
)
