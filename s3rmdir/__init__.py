"""
s3rmdir - Delete every object version and delete marker under an S3 prefix.

Modules:
- config.py - Environment and .env driven settings
- s3_utils.py - S3 client, version listing, DeleteObjects calls
- batching.py - Batch accumulation and prefix scope guard
- aggregator.py - Progress totals and completion barrier
- purger.py - Listing / draining / done orchestration
- cli.py - Command line entry point
"""

__version__ = "0.1.0"
