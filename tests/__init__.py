"""
No-Code Pipeline Builder - Test Suite

Test Organization:
- test_attributes.py: Annotation parsing and attribute inheritance
- test_extractor.py: Phase extraction from instruction trees
- test_matcher.py: Group eligibility and keyword matching
- test_space.py: Disk space estimation
- test_operation.py: Custom operation execution and the master cache
- test_scheduler.py: Scheduling and whole-run orchestration
- test_loader.py: Instruction tree and manifest files
- test_transforms.py: Transform registry, builtins and FITS I/O
- test_cli.py: Command-line interface

Fixtures are in tests/fixtures/:
- factories.py: GroupFactory, TreeFactory and test doubles

Run tests:
    $ pdm run pytest tests/ -v
"""
