"""Naive Bayes with kernel density estimates of the class-conditional densities."""

import numpy as np
from typing import Dict, Any, Optional
from sklearn.base import BaseEstimator, ClassifierMixin
from sklearn.neighbors import KernelDensity

from .base import ModelFactory, safe_float
from .classical import SklearnModel
from ..exceptions import DegenerateClassError, DegenerateFeatureError


def silverman_bandwidth(x: np.ndarray) -> float:
    """
    Rule-of-thumb Gaussian bandwidth, 0.9 * min(sd, IQR / 1.34) * n^(-1/5).

    When the spread is zero the scale falls back to sd, then |x[0]|, then 1,
    so a class whose values are all identical still gets a usable kernel.
    """
    x = np.asarray(x, dtype=float)
    hi = x.std(ddof=1) if len(x) > 1 else 0.0
    q75, q25 = np.percentile(x, [75, 25])
    lo = min(hi, (q75 - q25) / 1.34)
    if lo <= 0:
        lo = hi or abs(x[0]) or 1.0
    return 0.9 * lo * len(x) ** -0.2


class KernelNaiveBayes(ClassifierMixin, BaseEstimator):
    """
    Naive Bayes classifier with one univariate KDE per class and feature.

    The posterior of class c is proportional to
    P(c) * prod_j p_j(x_j | c), where each p_j is a KernelDensity fitted on
    the training values of feature j in class c.

    Parameters
    ----------
    kernel : str
        KernelDensity kernel (default: 'gaussian').
    bandwidth : float or None
        Fixed bandwidth; None selects one per class and feature with
        `silverman_bandwidth`.
    adjust : float
        Multiplier applied to the selected bandwidth (default: 1.0).
    """

    def __init__(self, kernel='gaussian', bandwidth=None, adjust=1.0):
        self.kernel = kernel
        self.bandwidth = bandwidth
        self.adjust = adjust

    def fit(self, X, y):
        X = np.asarray(X, dtype=float)
        y = np.asarray(y)

        self.classes_, counts = np.unique(y, return_counts=True)
        if len(self.classes_) < 2:
            raise DegenerateClassError(
                f"KernelNaiveBayes needs two classes, got {self.classes_.tolist()}"
            )

        constant = np.flatnonzero(X.var(axis=0) == 0)
        if constant.size:
            raise DegenerateFeatureError(
                f"Zero-variance features {constant.tolist()} cannot be density-estimated"
            )

        self.n_features_in_ = X.shape[1]
        self.class_log_prior_ = np.log(counts / counts.sum())
        self.bandwidths_ = np.empty((len(self.classes_), self.n_features_in_))
        self.densities_ = []

        for ci, label in enumerate(self.classes_):
            X_c = X[y == label]
            per_feature = []
            for j in range(self.n_features_in_):
                bw = self.bandwidth if self.bandwidth else silverman_bandwidth(X_c[:, j])
                bw *= self.adjust
                self.bandwidths_[ci, j] = bw
                per_feature.append(KernelDensity(kernel=self.kernel, bandwidth=bw).fit(X_c[:, [j]]))
            self.densities_.append(per_feature)

        return self

    def _joint_log_likelihood(self, X):
        X = np.asarray(X, dtype=float)
        if X.shape[1] != self.n_features_in_:
            raise ValueError(f"X has {X.shape[1]} features, expected {self.n_features_in_}")

        jll = np.tile(self.class_log_prior_, (X.shape[0], 1))
        for ci, per_feature in enumerate(self.densities_):
            for j, kde in enumerate(per_feature):
                jll[:, ci] += kde.score_samples(X[:, [j]])

        # Compact kernels can give zero density to every class; use the prior there
        lost = ~np.isfinite(jll).any(axis=1)
        jll[lost] = self.class_log_prior_
        return jll

    def predict_proba(self, X):
        jll = self._joint_log_likelihood(X)
        jll -= jll.max(axis=1, keepdims=True)
        proba = np.exp(jll)
        return proba / proba.sum(axis=1, keepdims=True)

    def predict(self, X):
        return self.classes_[np.argmax(self._joint_log_likelihood(X), axis=1)]


class KernelNaiveBayesModel(SklearnModel):
    """Kernel density naive Bayes classifier."""

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        config = dict(config or {})
        if 'bandwidth' in config:
            config['bandwidth'] = safe_float(config['bandwidth'], None)
        if 'adjust' in config:
            config['adjust'] = safe_float(config['adjust'], 1.0)
        super().__init__(KernelNaiveBayes, config, kernel='gaussian')


ModelFactory.register_model('naive_bayes_kernel', KernelNaiveBayesModel)
