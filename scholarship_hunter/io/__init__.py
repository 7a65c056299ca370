"""Record loaders and report artifact writers."""

from scholarship_hunter.io.records import load_applications, load_profile, load_scholarships_df

__all__ = ["load_applications", "load_profile", "load_scholarships_df"]
