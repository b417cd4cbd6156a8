"""
FastAPI blog backend package.

The application instance lives in `blog_backend.main` (`blog_backend.main:app`);
it is not imported here so that importing submodules has no side effects
on the filesystem.
"""
