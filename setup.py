from setuptools import find_namespace_packages, setup

VERSION = "0.1.0"

requirements = open("requirements.txt").readlines()

if __name__ == "__main__":
    setup(
        name="spaify",
        version=VERSION,
        packages=find_namespace_packages(include=["spaify", "spaify.*"]),
        package_data={"spaify.templates": ["info/*.tpl", "stubs/*"]},
        license="MIT",
        description="Scaffold Laravel projects for SPA development with Vue, Tailwind CSS, InertiaJS, Ziggy and Font Awesome",
        long_description=open("README.md").read(),
        long_description_content_type="text/markdown",
        classifiers=[
            "Development Status :: 3 - Alpha",
            "Intended Audience :: Developers",
            "License :: OSI Approved :: MIT License",
            "Programming Language :: Python :: 3",
        ],
        install_requires=requirements,
        extras_require={
            "test": ["pytest", "pytest-asyncio"],
        },
        entry_points={
            "console_scripts": ["spaify=spaify.cli.main:run_spaify"],
        },
        python_requires=">=3.9",
    )
