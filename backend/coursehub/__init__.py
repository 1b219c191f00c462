"""CourseHub catalog and account backend."""
