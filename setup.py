from setuptools import setup
setup(name="tcglog",
      version="0.1",
      description="Decode TCG (TPM) event logs into typed events",
      license="MIT",
      python_requires=">=3.10",
      packages=["tcglog"],
      py_modules=["tcglog_dump"],
      install_requires=[],
      extras_require={
          "test": ["pytest"],
      },
      entry_points={
          "console_scripts": [
              "tcglog-dump = tcglog_dump:main",
          ],
      })
