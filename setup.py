#!/usr/bin/env python

##
# Copyright (c) 2006-2017 Apple Inc. All rights reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
# http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
##

from os.path import dirname, abspath, join as joinpath
from setuptools import setup, find_packages as setuptools_find_packages
import errno
import os
import subprocess

base_version = "9.3"
base_project = "twistedimip"


#
# Utilities
#
def find_packages():
    modules = []

    def is_package(path):
        return (
            os.path.isdir(path) and
            os.path.isfile(os.path.join(path, "__init__.py"))
        )

    for pkg in filter(is_package, os.listdir(".")):
        modules.extend([pkg, ] + [
            "{}.{}".format(pkg, subpkg)
            for subpkg in setuptools_find_packages(pkg)
        ])
    return modules


def git_output(*args):
    output = subprocess.check_output(
        ("git",) + args,
        stderr=subprocess.STDOUT,
    )
    return output.decode("utf-8").strip()


def git_info(wc_path):
    """
    Look up info on a GIT working copy.
    """
    try:
        branch = git_output("-C", wc_path, "rev-parse", "--abbrev-ref", "HEAD")
        revision = git_output("-C", wc_path, "rev-parse", "--verify", "HEAD")
    except OSError as e:
        if e.errno == errno.ENOENT:
            return None
        raise
    except subprocess.CalledProcessError:
        return None

    try:
        tags = git_output("-C", wc_path, "describe", "--exact-match", "HEAD")
    except subprocess.CalledProcessError:
        tag = None
    else:
        tag = tags.split()[0]

    return dict(
        project=base_project,
        branch=branch,
        revision=revision,
        tag=tag,
    )


def version():
    """
    Compute the version number.
    """
    source_root = dirname(abspath(__file__))

    info = git_info(source_root)

    if info is None:
        # We don't have GIT info...
        return "{}a1+unknown".format(base_version)

    if info["tag"]:
        project_version = info["tag"]
        try:
            project, version = project_version.split("-")
        except ValueError:
            project = project_version
            version = "Unknown"

        # Only process tags with our project name prefix
        if project == base_project:
            assert version == base_version, (
                "Tagged version {!r} != {!r}".format(version, base_version)
            )
            # This is a correctly tagged release of this project.
            return base_version

    if info["branch"] == "master":
        # This is master.
        # Designate this as beta1, dev version based on git revision.
        return "{}b1.dev0+{}".format(base_version, info["revision"])

    # This is some unknown branch or tag...
    return "{}a1.dev0+{}.{}".format(
        base_version,
        info["revision"],
        info["branch"].replace("/", ".").replace("-", ".").lower(),
    )


#
# Options
#

project_name = "twistedimip"

description = "iMIP (iTIP over email) scheduling notifications"

with open(joinpath(dirname(abspath(__file__)), "README.rst")) as readme:
    long_description = readme.read()

classifiers = [
    "Development Status :: 4 - Beta",
    "Framework :: Twisted",
    "Intended Audience :: Information Technology",
    "License :: OSI Approved :: Apache Software License",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Topic :: Communications :: Email",
    "Topic :: Office/Business :: Groupware",
    "Topic :: Office/Business :: Scheduling",
]

author = "Apple Inc."

license = "Apache License, Version 2.0"

platforms = ["all"]


#
# Entry points
#

entry_points = {
    "console_scripts": [],
}

script_entry_points = {
    "sendimip":
    ("twistedimip.tools.sendimip", "main"),
}

for tool, (module, function) in script_entry_points.items():
    entry_points["console_scripts"].append(
        "twistedimip_{} = {}:{}".format(tool, module, function)
    )


#
# Dependencies
#

setup_requirements = []

install_requirements = [
    # Core frameworks
    "zope.interface",
    "Twisted<26",

    # Security frameworks
    "pyOpenSSL",          # for Twisted
    "service_identity",   # for Twisted

    # Calendar
    "python-dateutil",
    "pytz",
    "icalendar",
]

extras_requirements = {}


#
# Run setup
#

def doSetup():
    setup(
        name=project_name,
        version=version(),
        description=description,
        long_description=long_description,
        classifiers=classifiers,
        author=author,
        license=license,
        platforms=platforms,
        packages=find_packages(),
        entry_points=entry_points,
        data_files=[
            ("twistedimip", ["conf/twistedimip.plist"]),
        ],
        python_requires=">=3.6",
        setup_requires=setup_requirements,
        install_requires=install_requirements,
        extras_require=extras_requirements,
    )


#
# Main
#

if __name__ == "__main__":
    doSetup()
