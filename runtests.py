#!/usr/bin/env python
"""
Run the test suite against one of the settings modules in
django_dynamic_grid/tests:

    python runtests.py --settings=django_dynamic_grid.tests.test_postgres_settings
"""
import argparse
import os
import sys

import django
from django.conf import settings
from django.test.utils import get_runner


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument('--settings', default='django_dynamic_grid.tests.test_sqlite_settings')
    parser.add_argument('labels', nargs='*', default=['django_dynamic_grid.tests'])
    args = parser.parse_args()

    os.environ['DJANGO_SETTINGS_MODULE'] = args.settings
    django.setup()
    TestRunner = get_runner(settings)
    failures = TestRunner().run_tests(args.labels)
    sys.exit(bool(failures))


if __name__ == '__main__':
    main()
